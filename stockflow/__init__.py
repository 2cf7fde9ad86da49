"""StockFlow - stock catalog with a request and approval workflow."""
