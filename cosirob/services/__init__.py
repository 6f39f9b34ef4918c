# Service layer for Cosirob Commander
# - event_log:      bounded protocol event history with subscriber broadcast
# - backend_client: HTTP client for the serial backend
# - session:        encode -> send -> reconcile pose for one operator/device
# - positions:      named waypoints over a key-value store
# - robot_client:   shared instances wired for the NiceGUI app
