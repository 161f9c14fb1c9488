"""Domain business rules and constants."""

import re
from typing import Final

# Business Rules - Core domain constraints
MIN_TEXT_LENGTH: Final = 1
MAX_TEXT_LENGTH: Final = 50
MIN_QUANTITY: Final = 1
MAX_QUANTITY: Final = 9999

# Shape-only check, calendar validity is not enforced
CREATION_DATE_PATTERN: Final = re.compile(r"^\d{2}/\d{2}/\d{4}$", re.ASCII)
