#!/usr/bin/env python3
"""
Main FastAPI application for the bakery storefront.

Thin handlers over the catalog, availability, settings and order tables.
Every failure is answered as `{"error": "<message>"}`.
"""

import os
import uuid
from contextlib import asynccontextmanager
from datetime import date
from typing import Dict, List

from fastapi import Depends, FastAPI, File, HTTPException, Query, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import func
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Config
from ..data.database import create_tables, get_db
from ..data.models import AvailabilityDay, DayStatus, Order, OrderLine, Product, Setting
from ..intake import schedule
from ..schemas.store_models import (
    DeletedOut,
    OrderCreate,
    OrderOut,
    OrderUpdate,
    ProductIn,
    ProductOut,
    SettingIn,
    UploadOut,
)
from ..utils.logger import get_logger
from ..utils.security import mask_pii

log = get_logger("api")

SOLD_OUT_MESSAGE = "Dia esgotado"
PAST_DATE_MESSAGE = "Data já passou"
MAX_AVAILABILITY_DAYS = 366


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    os.makedirs(Config.UPLOAD_DIR, exist_ok=True)
    yield


# Initialize FastAPI app
app = FastAPI(
    title="Vovó's Baked Goods API",
    description="Catalog, availability, settings and orders for the bakery storefront",
    version="1.0.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your frontend domain
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error(request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error(request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=422, content={"error": message})


def _order_out(order: Order) -> OrderOut:
    return OrderOut.model_validate(order)


def _lines_from(payload: OrderCreate) -> List[OrderLine]:
    return [
        OrderLine(
            position=i,
            product_id=line.product_id,
            name=line.name,
            quantity=line.quantity,
            unit_price=line.unit_price,
        )
        for i, line in enumerate(payload.lines)
    ]


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Catalog

@app.get("/products", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).order_by(Product.name).all()


@app.post("/products", response_model=ProductOut)
def save_product(payload: ProductIn, db: Session = Depends(get_db)):
    if payload.id:
        product = db.get(Product, payload.id)
        if product is None:
            raise HTTPException(status_code=404, detail="Product not found")
    else:
        product = Product()
        db.add(product)
    product.name = payload.name
    product.price = payload.price
    product.description = payload.description
    product.image = payload.image
    db.commit()
    db.refresh(product)
    return product


@app.delete("/products/{product_id}", response_model=DeletedOut)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    product = db.get(Product, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    db.delete(product)
    db.commit()
    return DeletedOut()


# Availability

@app.get("/availability", response_model=Dict[str, str])
def get_availability(start: date = Query(...), end: date = Query(...), db: Session = Depends(get_db)):
    if start > end:
        raise HTTPException(status_code=400, detail="start must not be after end")
    if (end - start).days >= MAX_AVAILABILITY_DAYS:
        raise HTTPException(status_code=400, detail=f"range longer than {MAX_AVAILABILITY_DAYS} days")
    rows = (
        db.query(AvailabilityDay)
        .filter(AvailabilityDay.day >= start, AvailabilityDay.day <= end)
        .order_by(AvailabilityDay.day)
        .all()
    )
    return {row.day.isoformat(): DayStatus(row.status).value for row in rows}


# Settings

def _settings_map(db: Session) -> Dict[str, str]:
    return {row.key: row.value for row in db.query(Setting).order_by(Setting.key).all()}


@app.get("/settings", response_model=Dict[str, str])
def get_settings(db: Session = Depends(get_db)):
    return _settings_map(db)


@app.post("/settings", response_model=Dict[str, str])
def save_setting(payload: SettingIn, db: Session = Depends(get_db)):
    row = db.get(Setting, payload.key)
    if row is None:
        row = Setting(key=payload.key)
        db.add(row)
    row.value = payload.value
    db.commit()
    return {"key": payload.key, "value": payload.value}


# Orders

def _today() -> date:
    return date.today()


def _check_day_open(db: Session, order_date: date):
    if order_date < _today():
        raise HTTPException(status_code=400, detail=PAST_DATE_MESSAGE)
    row = db.get(AvailabilityDay, order_date)
    availability = {order_date.isoformat(): DayStatus(row.status).value} if row else {}
    if not schedule.is_selectable(order_date, availability):
        raise HTTPException(status_code=409, detail=SOLD_OUT_MESSAGE)

    setting = db.get(Setting, "capacity_limit")
    limit = schedule.parse_capacity(setting.value if setting else None)
    if limit is not None:
        booked = db.query(func.count(Order.id)).filter(Order.order_date == order_date).scalar()
        if booked >= limit:
            raise HTTPException(status_code=409, detail=SOLD_OUT_MESSAGE)


@app.get("/orders", response_model=List[OrderOut])
def list_orders(db: Session = Depends(get_db)):
    orders = db.query(Order).order_by(Order.created_at.desc(), Order.order_date.desc()).all()
    return [_order_out(o) for o in orders]


@app.post("/orders", response_model=OrderOut, status_code=201)
def create_order(payload: OrderCreate, db: Session = Depends(get_db)):
    if not schedule.is_valid_slot(payload.order_time):
        raise HTTPException(status_code=400, detail="Horário inválido")
    _check_day_open(db, payload.order_date)

    order = Order(
        customer_name=payload.customer_name.strip(),
        customer_phone=payload.customer_phone,
        order_date=payload.order_date,
        order_time=payload.order_time,
        items=payload.items,
        total=round(payload.total, 2),
        payment_method=payload.payment_method,
        lines=_lines_from(payload),
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    log.info("order %s created for %s on %s %s", order.id, mask_pii(order.customer_phone), order.order_date, order.order_time)
    return _order_out(order)


@app.post("/orders/update", response_model=OrderOut)
def update_order(payload: OrderUpdate, db: Session = Depends(get_db)):
    order = db.get(Order, payload.id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    if not schedule.is_valid_slot(payload.order_time):
        raise HTTPException(status_code=400, detail="Horário inválido")
    order.customer_name = payload.customer_name.strip()
    order.customer_phone = payload.customer_phone
    order.order_date = payload.order_date
    order.order_time = payload.order_time
    order.items = payload.items
    order.total = round(payload.total, 2)
    order.payment_method = payload.payment_method
    order.lines = _lines_from(payload)
    db.commit()
    db.refresh(order)
    return _order_out(order)


@app.delete("/orders/{order_id}", response_model=DeletedOut)
def delete_order(order_id: str, db: Session = Depends(get_db)):
    order = db.get(Order, order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    db.delete(order)
    db.commit()
    return DeletedOut()


# Files

@app.post("/upload", response_model=UploadOut)
async def upload(file: UploadFile = File(...)):
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Empty file")
    _, ext = os.path.splitext(file.filename or "")
    name = f"{uuid.uuid4().hex}{ext.lower()[:10]}"
    os.makedirs(Config.UPLOAD_DIR, exist_ok=True)
    with open(os.path.join(Config.UPLOAD_DIR, name), "wb") as f:
        f.write(content)
    return UploadOut(url=f"{Config.PUBLIC_URL}/uploads/{name}")


app.mount("/uploads", StaticFiles(directory=Config.UPLOAD_DIR, check_dir=False), name="uploads")

if __name__ == "__main__":
    import uvicorn
    Config.validate()
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
