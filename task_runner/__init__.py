"""Run a one-off ECS task, optionally wait for it to stop, and report its exit code."""
