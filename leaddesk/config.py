from typing import Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"
    
    # Database (use postgresql+asyncpg://... in production)
    DATABASE_URL: str = "sqlite+aiosqlite:///./leaddesk.db"
    DB_ECHO: bool = False
    SEED_DEMO_DATA: bool = True  # Seed demo leads/deals into an empty database
    
    # API Settings
    API_PREFIX: str = "/api"  # Mount point of the leads, deals and outreach routers
    
    # AI Settings (outreach planner)
    OPENAI_API_KEY: str = ""
    GEMINI_API_KEY: Optional[str] = None
    AI_MODEL: str = "gpt-4.1-mini"
    AI_MAX_RETRIES: int = 3
    AI_RATE_LIMIT_BACKOFF_SECONDS: int = 5
    
    # Outreach planning
    OUTREACH_PLAN_TIMEOUT_SECONDS: float = 20.0
    OUTREACH_DEFAULT_HORIZON_DAYS: int = 14
    OUTREACH_RECENT_ACTIVITY_LIMIT: int = 5
    
    class Config:
        env_file = ".env"

settings = Settings()
