"""
Horizon REST API - FastAPI application for the cloud release radar.
"""

from collections.abc import Iterator
from datetime import datetime

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from horizon import __version__
from horizon.ai import BaseAIClient, GeminiClient
from horizon.config.settings import DEFAULT_CUSTOMER, Settings
from horizon.exceptions import InvalidInputError
from horizon.inventory import SAMPLE_INVENTORY, InventoryItem, aggregate, read_rows, total_amount
from horizon.radar import Analyzer, ReleaseNote, StrategicInsight, generate_email_digest


# FastAPI app
app = FastAPI(
    title="Horizon API",
    description="Cloud Release Radar - Match vendor release notes to your billed SKUs",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class RowsRequest(BaseModel):
    """Raw export rows, already split into cells."""
    rows: list = Field(..., description="List of rows, each a list of string cells")


class ItemModel(BaseModel):
    """An inventory item as sent by a client."""
    sku: str
    description: str
    unit: str = ""
    quantity: float = 0.0
    amount: float = 0.0

    def to_item(self) -> InventoryItem:
        return InventoryItem(
            id=self.sku,
            description=self.description,
            unit=self.unit,
            quantity=self.quantity,
            amount=self.amount,
        )


class AnalyzeRequest(BaseModel):
    """Analysis request; either items or the sample portfolio."""
    items: list[ItemModel] = Field(default_factory=list)
    use_sample: bool = Field(False, description="Analyze the sample portfolio instead")


class DigestRequest(BaseModel):
    """Email digest request."""
    customer_name: str = DEFAULT_CUSTOMER
    notes: list[ReleaseNote] = Field(default_factory=list)
    insights: list[StrategicInsight] = Field(default_factory=list)


# Helper functions
def get_client() -> Iterator[BaseAIClient]:
    """AI client for one request, closed once the response is done."""
    with GeminiClient() as client:
        if not client.connect():
            raise HTTPException(status_code=503, detail="GEMINI_API_KEY is not configured")
        yield client


def inventory_response(items: list[InventoryItem]) -> dict:
    return {
        "items": [i.to_dict() for i in items],
        "summary": {
            "skus": len(items),
            "total_amount": round(total_amount(items), 2),
        },
    }


# Routes
@app.get("/")
async def root():
    """API root - health check and info."""
    return {
        "name": "Horizon API",
        "version": __version__,
        "description": "Cloud Release Radar",
        "endpoints": {
            "inventory": "/inventory",
            "inventory/rows": "/inventory/rows",
            "inventory/sample": "/inventory/sample",
            "analyze": "/analyze",
            "digest": "/digest",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}


@app.post("/inventory")
async def upload_inventory(file: UploadFile = File(...)):
    """Aggregate an uploaded consumption export."""
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty file.")

    layout = Settings.from_env().layout
    try:
        items = aggregate(read_rows(data), layout)
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return inventory_response(items)


@app.post("/inventory/rows")
async def aggregate_rows(request: RowsRequest):
    """Aggregate rows that were parsed client side."""
    try:
        items = aggregate(request.rows, Settings.from_env().layout)
    except InvalidInputError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return inventory_response(items)


@app.get("/inventory/sample")
async def sample_inventory():
    """The sample portfolio."""
    return inventory_response(list(SAMPLE_INVENTORY))


@app.post("/analyze")
def analyze(request: AnalyzeRequest, client: BaseAIClient = Depends(get_client)):
    """Match release notes to the inventory and synthesize insights."""
    if request.use_sample:
        items = list(SAMPLE_INVENTORY)
    else:
        items = sorted((i.to_item() for i in request.items), key=lambda i: i.amount, reverse=True)

    if not items:
        raise HTTPException(status_code=400, detail="No inventory items to analyze.")

    report = Analyzer(client).run(items)
    return report.to_dict()


@app.post("/digest")
def digest(request: DigestRequest, client: BaseAIClient = Depends(get_client)):
    """Draft the HTML email digest from relevant notes and insights."""
    relevant: list[ReleaseNote] = [n for n in request.notes if n.is_relevant]
    html = generate_email_digest(
        client,
        relevant,
        request.customer_name,
        request.insights,
    )
    return {"customer_name": request.customer_name, "html": html}


# Run with: uvicorn api.main:app --reload
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
