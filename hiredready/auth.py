from fastapi import APIRouter, Request, File, UploadFile, Depends
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlmodel import Session, select, or_
from passlib.context import CryptContext
from jose import JWTError, jwt
from datetime import datetime, timedelta
from pathlib import Path
import aiofiles
import hashlib
import logging
import re
import secrets
import time

from hiredready import oauth
from hiredready.config import (
    EXTERNAL_TOKEN_EXPIRE_DAYS,
    FRONTEND_URL,
    JWT_ALGORITHM,
    LOCAL_TOKEN_EXPIRE_DAYS,
    RESET_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
    UPLOAD_DIR,
)
from hiredready.db import engine
from hiredready.errors import InvalidInput, ServerError, Unauthorized
from hiredready.mailer import EmailDeliveryError, send_email
from hiredready.models import RegisterType, User
from hiredready.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
IMAGE_DIR = UPLOAD_DIR / "images"
RESET_SENT_MESSAGE = "If an account with that email exists, a password reset link has been sent."


def create_access_token(user_id: int, expires_days: int = LOCAL_TOKEN_EXPIRE_DAYS) -> str:
    expire = datetime.utcnow() + timedelta(days=expires_days)
    return jwt.encode({"id": user_id, "exp": expire}, SECRET_KEY, algorithm=JWT_ALGORITHM)


def verify_password(plain_password, hashed_password):
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def get_user_by_email(session: Session, email: str):
    return session.exec(select(User).where(User.email == email.lower())).first()


def user_to_dict(user: User, token: str = None) -> dict:
    data = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "profileImageUrl": user.profile_image_url,
    }
    if token:
        data["token"] = token
    return data


def get_current_user(request: Request) -> User:
    """Resolve the bearer token in the Authorization header to a user."""
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise Unauthorized("Not authorized, no token")
    token = header.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise Unauthorized("Not authorized, token failed")
    user_id = payload.get("id")
    if user_id is None:
        raise Unauthorized("Not authorized, token failed")
    with Session(engine) as session:
        user = session.get(User, user_id)
    if not user:
        raise Unauthorized("User not found")
    return user


def upsert_google_user(session: Session, profile: dict) -> User:
    email = profile["email"].lower()
    user = session.exec(
        select(User).where(or_(User.email == email, User.social_id == profile["sub"]))
    ).first()
    if user:
        if not user.profile_image_url and profile.get("picture"):
            user.profile_image_url = profile["picture"]
            user.updated_at = datetime.utcnow()
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    user = User(
        name=profile.get("name") or email,
        email=email,
        profile_image_url=profile.get("picture"),
        register_type=RegisterType.GOOGLE.value,
        social_id=profile["sub"],
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Created user %s from Google sign-in", user.id)
    return user


@router.post("/register", status_code=201)
def register(payload: RegisterRequest):
    with Session(engine) as session:
        if get_user_by_email(session, payload.email):
            raise InvalidInput("User already exists")
        user = User(
            name=payload.name,
            email=payload.email.lower(),
            password_hash=get_password_hash(payload.password),
            profile_image_url=payload.profile_image_url,
            register_type=RegisterType.LOCAL.value,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user_to_dict(user, create_access_token(user.id))


@router.post("/login")
def login(payload: LoginRequest):
    with Session(engine) as session:
        user = get_user_by_email(session, payload.email)
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthorized("Invalid email or password")
    return user_to_dict(user, create_access_token(user.id, LOCAL_TOKEN_EXPIRE_DAYS))


@router.get("/profile")
def profile(current_user: User = Depends(get_current_user)):
    data = user_to_dict(current_user)
    data["registerType"] = current_user.register_type
    data["createdAt"] = current_user.created_at.isoformat()
    return data


@router.post("/upload-image")
async def upload_image(request: Request, image: UploadFile = File(None)):
    if image is None or not image.filename:
        raise InvalidInput("No file uploaded")

    IMAGE_DIR.mkdir(parents=True, exist_ok=True)
    safe_name = re.sub(r"[^A-Za-z0-9._-]", "-", Path(image.filename).name)
    filename = f"{int(time.time() * 1000)}-{safe_name}"
    async with aiofiles.open(IMAGE_DIR / filename, "wb") as f:
        await f.write(await image.read())

    return {"imageUrl": f"{request.base_url}uploads/images/{filename}"}


@router.get("/login/google")
def google_login():
    return RedirectResponse(url=oauth.authorization_url(), status_code=302)


@router.get("/login/google/callback")
def google_callback(request: Request, code: str = None):
    failure = RedirectResponse(url=f"{FRONTEND_URL}/login?error=google-auth-failed", status_code=303)
    if not code:
        return failure
    try:
        profile_claims = oauth.fetch_profile(code)
    except oauth.OAuthError as e:
        logger.error("Google auth error: %s", e)
        return failure

    with Session(engine) as session:
        user = upsert_google_user(session, profile_claims)
        token = create_access_token(user.id, EXTERNAL_TOKEN_EXPIRE_DAYS)
        user_data = user_to_dict(user)

    return templates.TemplateResponse("google_callback.html", {
        "request": request,
        "token": token,
        "user": user_data,
        "frontend_url": FRONTEND_URL,
    })


@router.post("/forgot-password")
def forgot_password(payload: ForgotPasswordRequest):
    with Session(engine) as session:
        user = get_user_by_email(session, payload.email)
        # accounts without a local password have nothing to reset
        if not user or not user.password_hash:
            return {"message": RESET_SENT_MESSAGE}

        reset_token = secrets.token_hex(32)
        user.password_reset_token = hash_reset_token(reset_token)
        user.password_reset_expires = datetime.utcnow() + timedelta(minutes=RESET_TOKEN_EXPIRE_MINUTES)
        session.add(user)
        session.commit()

        html = templates.get_template("reset_password_email.html").render(
            reset_url=f"{FRONTEND_URL}/reset-password/{reset_token}",
            minutes=RESET_TOKEN_EXPIRE_MINUTES,
        )
        try:
            send_email(user.email, f"Your Password Reset Token (Valid for {RESET_TOKEN_EXPIRE_MINUTES} min)", html)
        except EmailDeliveryError:
            user.password_reset_token = None
            user.password_reset_expires = None
            session.add(user)
            session.commit()
            raise ServerError("Email could not be sent. Please try again.")

    return {"message": RESET_SENT_MESSAGE}


@router.post("/reset-password")
def reset_password(payload: ResetPasswordRequest):
    hashed = hash_reset_token(payload.token)
    with Session(engine) as session:
        user = session.exec(
            select(User).where(
                User.password_reset_token == hashed,
                User.password_reset_expires > datetime.utcnow(),
            )
        ).first()
        if not user:
            raise InvalidInput("Token is invalid or has expired.")

        user.password_hash = get_password_hash(payload.password)
        user.password_reset_token = None
        user.password_reset_expires = None
        user.updated_at = datetime.utcnow()
        session.add(user)
        session.commit()

    return {"message": "Password has been successfully reset."}
