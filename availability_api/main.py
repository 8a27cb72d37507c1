import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .pricing import load_price_table
from .routes import router as api_router

app = FastAPI(title=f"{config.PROPERTY_NAME} Availability")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Loaded once; an unreadable table leaves every week unpriced
app.state.price_table = load_price_table(config.PRICES_PATH)


@app.get("/")
async def index():
    return {"status": f"{config.PROPERTY_NAME} availability API with pricing is running"}

# API routes
app.include_router(api_router)


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
