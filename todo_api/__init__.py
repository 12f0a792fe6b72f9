"""Single-user todo list served over a JSON REST API."""
