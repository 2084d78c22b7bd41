# storefront/product_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Product Service (dev mock)")


PRODUCTS = {
    "1": {"id": "1", "title": "Charizard - Base Set", "price": 5999.99, "stock": 5,
          "vendor": "Elite Pokemon Cards", "condition": "mint", "rarity": "legendary"},
    "2": {"id": "2", "title": "Pikachu - Base Set", "price": 299.99, "stock": 10,
          "vendor": "Elite Pokemon Cards", "condition": "near-mint", "rarity": "rare"},
    "3": {"id": "3", "title": "Black Lotus - Alpha", "price": 24999.00, "stock": 1,
          "vendor": "Vintage Vault", "condition": "excellent", "rarity": "legendary"},
    "4": {"id": "4", "title": "Booster Pack - Jungle", "price": 49.50, "stock": 40,
          "vendor": "Card Corner", "condition": "sealed", "rarity": "common"},
}


@app.get("/products")
def list_products():
    return list(PRODUCTS.values())


@app.get("/products/{product_id}")
def get_product(product_id: str):
    product = PRODUCTS.get(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
