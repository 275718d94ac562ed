"""Pool league domain: store models, DTOs and data access."""
