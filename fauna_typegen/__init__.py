"""Generate TypeScript types from Fauna collection schemas."""
