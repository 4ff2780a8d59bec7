from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://postgres@localhost:5432/draftpress"
    app_env: str = "development"
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    api_host: str = "localhost"
    api_port: int = 8000

    # MCP server
    mcp_transport: str = "stdio"  # stdio | http | sse
    mcp_host: str = "localhost"
    mcp_port: int = 9000
    mcp_owner_id: str = "local"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def sql_echo(self) -> bool:
        return self.app_env == "development"


settings = Settings()
