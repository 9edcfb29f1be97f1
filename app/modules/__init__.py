"""Domain modules package."""

from app.modules.billing import models as billing_models  # noqa: F401
from app.modules.bookings import models as bookings_models  # noqa: F401
from app.modules.identity import models as identity_models  # noqa: F401
from app.modules.mentors import models as mentors_models  # noqa: F401
from app.modules.slots import models as slots_models  # noqa: F401
