"""Services Layer - IO-bound orchestration over core/ logic and infrastructure/ clients.

Invariants:
    - Services take their DB session, chain client and publish callable as arguments
    - Notification content is decided in core/notifications.py; services only deliver it

Design Decisions:
    - One module per workflow (dispatch, event processing, comments, metrics, snowball,
      spotlight, post office) shared by truapi, pushd and the batch actions
"""
