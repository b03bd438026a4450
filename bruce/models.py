# Central models file - import all table models here so create_all sees them

from bruce.auth.models import Credential  # noqa: F401
from bruce.memory.models import Memory  # noqa: F401
