"""Trip lifecycle and adaptive checklist/packing engine."""
