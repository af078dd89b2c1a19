from app.models.user import User
from app.models.customer_profile import CustomerProfile
from app.models.service_order import ServiceOrder
from app.models.payment import Payment
from app.models.order_event import OrderEvent

# add ALL models here
