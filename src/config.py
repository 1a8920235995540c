"""Configuration management."""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration."""
    
    # Price comparison tolerance (currency values carry parse drift)
    PRICE_EPSILON = float(os.getenv("BOOKLIST_PRICE_EPSILON", "1.0e-4"))
    
    # Book lists
    DEFAULT_CAPACITY = int(os.getenv("BOOKLIST_DEFAULT_CAPACITY", "100"))
    FILE_ENCODING = os.getenv("BOOKLIST_FILE_ENCODING", "utf-8")
    
    # Logging
    LOG_LEVEL = os.getenv("BOOKLIST_LOG_LEVEL", "INFO")
