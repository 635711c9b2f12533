import sys
from pathlib import Path

from dotenv import load_dotenv

# Ensure we can import the app
current_dir = Path(__file__).parent
sys.path.insert(0, str(current_dir))

# Export .env before settings are built so uvicorn sees the same values
load_dotenv()


def main():
    import uvicorn
    from leadmind.config import settings

    print("Starting LeadMind assessment service...")
    print(f"Server: http://{settings.HOST}:{settings.PORT}")
    print(f"API Docs: http://{settings.HOST}:{settings.PORT}/docs")
    print("=" * 50)

    try:
        uvicorn.run(
            "leadmind.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.RELOAD,
            log_level=settings.LOG_LEVEL.lower()
        )
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
