"""Surface declarations bundled with credgate."""
