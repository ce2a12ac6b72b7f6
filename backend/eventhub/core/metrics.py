"""
Metrics instrumentation for observability.
Counters live in the default prometheus_client registry.
"""

from prometheus_client import Counter

# Registration metrics
registration_attempts = Counter(
    'eventhub_registration_attempts_total',
    'Total registration attempts',
    ['outcome']  # registered, already_registered, full, not_found, persist_failure
)

registration_retries = Counter(
    'eventhub_registration_retries_total',
    'Registration retries due to version conflicts'
)

# Store metrics
store_operations = Counter(
    'eventhub_store_operations_total',
    'Event store operations',
    ['operation', 'result']  # load/upsert/remove/clear, ok/conflict/unavailable
)

store_malformed_reads = Counter(
    'eventhub_store_malformed_reads_total',
    'Persisted containers that failed to parse'
)

store_unreadable_records = Counter(
    'eventhub_store_unreadable_records_total',
    'Persisted records skipped on read because they failed validation'
)

store_legacy_records = Counter(
    'eventhub_store_legacy_records_total',
    'Persisted records rewritten on read from an older layout'
)

# Lifecycle metrics
event_transitions = Counter(
    'eventhub_event_transitions_total',
    'Event lifecycle changes',
    ['action']  # created, approved, rejected, cancelled, completed, deleted
)

# User moderation metrics
user_moderation_actions = Counter(
    'eventhub_user_moderation_actions_total',
    'Admin actions on user accounts',
    ['action']  # banned, unbanned, deleted
)


def record_registration(outcome: str):
    """Record registration outcome."""
    registration_attempts.labels(outcome=outcome).inc()

def record_store_operation(operation: str, result: str):
    """Record store operation. Result: ok, conflict, unavailable"""
    store_operations.labels(operation=operation, result=result).inc()

def record_transition(action: str):
    event_transitions.labels(action=action).inc()

def record_user_action(action: str):
    user_moderation_actions.labels(action=action).inc()
