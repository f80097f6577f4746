"""Web interface and ADE reverse proxy."""
