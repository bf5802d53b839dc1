"""Unified exception hierarchy for lockin."""


class LockInError(Exception):
    """Base exception for all lockin errors."""


# Store
class StoreError(LockInError):
    """Base exception for persistent store operations."""


class StoreReadError(StoreError):
    """Failed to read a record from the store."""


class StoreWriteError(StoreError):
    """Failed to write or remove a record in the store."""


# Redirect engine
class RedirectEngineError(LockInError):
    """Base exception for redirect engine operations."""


class RuleUpdateError(RedirectEngineError):
    """The engine rejected or failed to apply a rule update."""


class RuleVerificationError(RedirectEngineError):
    """The engine reports no active rules after a non-empty addition."""


# Input
class InvalidInputError(LockInError):
    """A command argument was rejected at the boundary."""


class InvalidDestinationError(InvalidInputError):
    """A destination URL or hostname could not be parsed."""


# Scheduler
class SchedulerError(LockInError):
    """Failed to register, cancel or read an alarm."""


# Notifications
class NotificationError(LockInError):
    """Failed to deliver a notification."""


# Data management
class DataImportError(LockInError):
    """A backup payload is malformed or has an unsupported version."""
