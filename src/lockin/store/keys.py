"""Record names used in the persistent store."""

SITE_USAGE = "siteUsage"
BLOCKED_SITES = "blockedSites"
TIMER_STATE = "timerState"
BRAIN_BREAK = "brainBreak"
ALARMS = "alarms"
NOTIFICATIONS_ENABLED = "notificationsEnabled"
RULE_WARNING = "ruleWarning"
STREAK = "streak"
LAST_VISIT_DATE = "lastVisitDate"

# Records carried by export/import. Alarms are host scheduling state, not user data.
USER_DATA_KEYS = (
    SITE_USAGE,
    BLOCKED_SITES,
    TIMER_STATE,
    BRAIN_BREAK,
    NOTIFICATIONS_ENABLED,
    STREAK,
    LAST_VISIT_DATE,
)
