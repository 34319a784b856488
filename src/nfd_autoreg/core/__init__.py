"""Face event handling: URIs, network filters, classification, command issuing, reconciliation."""
