from auditlog.routers.logs import create_router as create_logs_router

__all__ = ["create_logs_router"]
