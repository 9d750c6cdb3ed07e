# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import token_for, get_current_user
from utils.audit import write_log, client_ip
from utils.errors import AuthError, ValidationError
from models import users as models
from schemas import user as schemas
from database import get_db, transaction

router = APIRouter(prefix="/auth", tags=["Auth"])

# Register a new customer account
@router.post("/register", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(user: schemas.UserCreate, request: Request, db: Session = Depends(get_db)):
    # Normalize input
    normalized_email = user.email.strip().lower()
    username = user.username.strip()

    # Check for existing user
    db_user = db.query(models.User).filter(
        or_(func.lower(models.User.email) == normalized_email, models.User.username == username)
    ).first()
    if db_user:
        write_log(
            db,
            user_id=None,
            action="REGISTER",
            resource="auth",
            status="FAIL",
            ip=client_ip(request),
            meta={"email": normalized_email, "reason": "User exists"},
        )
        raise ValidationError("User with this email or username already exists")

    # Create new user instance with hashed password
    with transaction(db):
        new_user = models.User(
            username=username,
            email=normalized_email,
            password_hash=get_password_hash(user.password),
            role="customer",
        )
        db.add(new_user)
    db.refresh(new_user)

    # Log successful registration event
    write_log(
        db,
        user_id=new_user.id,
        action="REGISTER",
        resource="auth",
        status="SUCCESS",
        ip=client_ip(request),
        meta={"email": new_user.email},
    )

    return {"token": token_for(new_user), "user": new_user}


# Authenticate user and issue JWT token
@router.post("/login", response_model=schemas.AuthResponse)
def login(payload: schemas.UserLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    db_user = db.query(models.User).filter(func.lower(models.User.email) == email).first()

    # Validate credentials and log failure on error
    if not db_user or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise AuthError("Invalid credentials")

    # Log successful login event
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": db_user.email})

    return {"token": token_for(db_user), "user": db_user}


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.MeResponse)
def me(current_user: models.User = Depends(get_current_user)):
    return {"message": "User authenticated successfully", "user": current_user}
