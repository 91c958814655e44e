# textile_orders/catalog_service/main.py
from fastapi import FastAPI, HTTPException

app = FastAPI(title="Catalog Service (dev mock)")


CATALOG = {
    "thread": [
        {"id": 1, "displayName": "Cotton 20/1 Raw White", "availableQuantity": 120, "unitPrice": 450.0, "inventoryReference": 11},
        {"id": 2, "displayName": "Polyester 150D Black", "availableQuantity": 35, "unitPrice": "612.50", "inventoryReference": 12},
        {"id": 3, "displayName": "Viscose 30/1 Dyed Navy", "availableQuantity": 0, "unitPrice": 720},
    ],
    "fabric": [
        {"id": 1, "displayName": "Grey Lawn 60x60", "availableQuantity": 800, "unitPrice": 185.75, "inventoryReference": 21},
        {"id": 2, "displayName": "Twill 3/1 Khaki", "availableQuantity": 240, "unitPrice": 310, "inventoryReference": 22},
    ],
}

@app.get("/catalog/{product_type}")
def list_products(product_type: str):
    products = CATALOG.get(product_type.lower())
    if products is None:
        raise HTTPException(status_code=404, detail="Unknown product type")
    return products
