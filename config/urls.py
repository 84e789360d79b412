"""
URL configuration for the UserTasks project.
"""
from django.urls import path
from ninja import NinjaAPI

from apps.core.exceptions import register_exception_handlers

api = NinjaAPI(
    title="UserTasks API",
    version="1.0.0",
    description="API for managing users and tasks",
    docs_url="/docs",
)
register_exception_handlers(api)

from apps.identity.api import router as auth_router, users_router
from apps.tasks.api import router as tasks_router

api.add_router("/auth", auth_router)
api.add_router("/users", users_router)
api.add_router("/tasks", tasks_router)

urlpatterns = [
    path('api/', api.urls),
]
