"""External collaborators: REST API and terminal play loop."""
