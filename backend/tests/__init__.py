# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from brackets.models.group import Group  # noqa: F401
from brackets.models.match import Match  # noqa: F401
from brackets.models.team import Team  # noqa: F401
from brackets.models.tournament import Tournament  # noqa: F401
