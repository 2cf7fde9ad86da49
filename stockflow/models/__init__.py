# Models package
from stockflow.models.user import User
from stockflow.models.stock import Stock, StockHistory, ChangeType
from stockflow.models.stock_request import StockRequest, RequestStatus
