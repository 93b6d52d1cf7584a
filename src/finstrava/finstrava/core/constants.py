"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_EXPIRING_DAYS = 30
DEFAULT_RECENT_ENTRIES = 5
DEFAULT_REVENUE_MONTHS = 6

DEFAULT_GRACE_PERIOD_DAYS = 0
DEFAULT_RENEWAL_PERIOD_MONTHS = 12

DEFAULT_WORK_HOURS = 44
DEFAULT_PAYMENT_DAY = 5

OVERDUE_ALERT_DAYS = 30
PENDING_ALERT_DAYS = 7

AUTOMATION_LOG_TYPE = "contract_processing"
NO_PACKAGE_ID = "sem-pacote"
NO_PACKAGE_NAME = "Sem Pacote"

# pt-BR short month names, as used in descriptions and charts
MONTH_LABELS = ("jan", "fev", "mar", "abr", "mai", "jun", "jul", "ago", "set", "out", "nov", "dez")
