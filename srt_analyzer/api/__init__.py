import importlib

from fastapi import FastAPI

# 라우터 모듈 (각 모듈은 ROUTERS 리스트를 노출)
ROUTER_MODULES = ("health", "srt")


def include_all_routers(app: FastAPI) -> None:
    """srt_analyzer.api.<module>.ROUTERS 를 순서대로 app 에 등록"""
    for name in ROUTER_MODULES:
        module = importlib.import_module(f"{__name__}.{name}")
        for router in module.ROUTERS:
            app.include_router(router)
