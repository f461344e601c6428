from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from database import Base, engine
from datetime import datetime
import models  # registers every table on Base.metadata
import config
import os
import logging
import routers.unit as unit
import routers.item as item
import routers.item_detail as item_detail
import routers.inventory_log as inventory_log
import routers.account as account
import routers.account_category as account_category
import routers.financial_settings as financial_settings
import routers.journal as journal
import routers.purchase as purchase
import routers.sale as sale
import routers.currency_exchange as currency_exchange
import routers.accounting_reports as accounting_reports


LOG_DIR = config.LOG_DIR
os.makedirs(LOG_DIR, exist_ok=True) # Create the log directory if it doesn't exist

# Create a unique log file name based on current date/time
current_time_str = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
LOG_FILE = os.path.join(LOG_DIR, f"app_{current_time_str}.log")

# Configure the root logger
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=LOG_FILE,
    filemode='a'
)

# Also echo logs to the console
console_handler = logging.StreamHandler()
console_handler.setLevel(logging.INFO)
console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
logging.getLogger().addHandler(console_handler)

logger = logging.getLogger(__name__)
logger.info("Application starting up...")
# --- End Logging Configuration ---


# Create database tables
Base.metadata.create_all(bind=engine)


app = FastAPI()

# Split the configured origins into a list, stripping any whitespace
allowed_origins = [origin.strip() for origin in config.CORS_ALLOWED_ORIGINS.split(',')]

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Inventory & Accounting API",
        version="1.0.0",
        description="API for inventory, double-entry journal and financial reports",
        routes=app.routes,
    )
    openapi_schema["components"]["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
        }
    }
    # Apply security globally to all endpoints
    openapi_schema["security"] = [{"BearerAuth": []}]
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi


app.include_router(unit.router)
app.include_router(item.router)
app.include_router(item_detail.router)
app.include_router(inventory_log.router)
app.include_router(account.router)
app.include_router(account_category.router)
app.include_router(financial_settings.router)
app.include_router(journal.router)
app.include_router(purchase.router)
app.include_router(sale.router)
app.include_router(currency_exchange.router)
app.include_router(accounting_reports.router)

@app.get("/")
async def root():
    return {"message": "Welcome to the Inventory & Accounting API!"}
