"""Services Layer — Store and NotificationHub, the stateful shell around core/.

Invariants:
    - Every mutation follows: precondition -> mutate -> persist -> invalidate -> notify
    - Services receive collaborators by constructor injection (no hidden globals)
"""
