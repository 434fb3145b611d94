# app/routes/__init__.py
from fastapi import APIRouter
from app.routes.profile import profile
from app.routes.activities import activity_routes
from app.routes.chat import messages
from app.routes.ratings import ratings
from app.routes.access import access
from app.routes.moderation import moderation
from app.routes.verification import verification
from app.routes.admin import admin
from app.routes.donations import donations
from app.routes.push import push


api_router = APIRouter(prefix="/api")

# Profile routes
api_router.include_router(profile.router)

# Activity routes
api_router.include_router(activity_routes.router)
api_router.include_router(messages.router)
api_router.include_router(ratings.router)

# Onboarding routes
api_router.include_router(access.router)
api_router.include_router(verification.router)

# Moderation routes
api_router.include_router(moderation.router)
api_router.include_router(admin.router)

# Donation routes
api_router.include_router(donations.router)

# Push notification routes
api_router.include_router(push.router)
