"""Server runner for both development and production"""
import uvicorn
import os

if __name__ == "__main__":
    port = int(os.getenv("PORT", 8000))

    # Reload only outside production
    is_production = os.getenv("ENVIRONMENT", "development") == "production"

    uvicorn.run(
        "rbm.main:app",
        host="0.0.0.0",
        port=port,
        reload=not is_production,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
