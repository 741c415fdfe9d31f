"""Centralized constants for brform."""

# Masks
DEFAULT_CURRENCY_PREFIX = "R$ "
DEFAULT_DATE_PATTERN = "%d/%m/%Y"
MAX_CURRENCY_DIGITS = 15  # R$ 9.999.999.999.999,99

# Two-digit years below this pivot belong to the 2000s
TWO_DIGIT_YEAR_PIVOT = 50

# Check digit weights
CPF_WEIGHTS_FIRST = (10, 9, 8, 7, 6, 5, 4, 3, 2)
CPF_WEIGHTS_SECOND = (11, 10, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_FIRST = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
CNPJ_WEIGHTS_SECOND = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)

# Text fields
DEFAULT_MAX_TEXT_LENGTH = 255

# i18n
DEFAULT_LOCALE = "pt_BR"
SUPPORTED_LOCALES = ["pt_BR", "en"]

# Logging
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_HANDLER = "console"  # console or file
DEFAULT_LOG_FILE = "brform.log"

# Widgets
ERROR_COLOR = "#ef4444"
