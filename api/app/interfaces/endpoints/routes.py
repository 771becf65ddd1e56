from fastapi import APIRouter

from . import auth_routes, file_routes, status_routes, user_routes

# 所有路由都挂在根路径下，没有/api前缀
ROUTERS = (
    status_routes.router,  # /status /stats，无需认证
    auth_routes.router,  # /connect /disconnect
    user_routes.router,  # /users /users/me
    file_routes.router,  # /files，公开文件内容可匿名读取
)


def create_api_routes() -> APIRouter:
    api_router = APIRouter()
    for sub_router in ROUTERS:
        api_router.include_router(sub_router)
    return api_router


router = create_api_routes()
