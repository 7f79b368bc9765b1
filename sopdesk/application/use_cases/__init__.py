"""Use cases: one service per resource, operating on the resolved caller."""

from sopdesk.application.use_cases.employee_operations import EmployeeService
from sopdesk.application.use_cases.settings_operations import DEFAULT_SETTINGS, SettingsService
from sopdesk.application.use_cases.sop_completion import SopCompletionService
from sopdesk.application.use_cases.sop_operations import SopService
from sopdesk.application.use_cases.stats import StatsService
from sopdesk.application.use_cases.subscription_operations import SubscriptionService
from sopdesk.application.use_cases.system_logs import SystemLogService
from sopdesk.application.use_cases.training_operations import TrainingService

__all__ = [
    "DEFAULT_SETTINGS",
    "EmployeeService",
    "SettingsService",
    "SopCompletionService",
    "SopService",
    "StatsService",
    "SubscriptionService",
    "SystemLogService",
    "TrainingService",
]
