"""
SENSORVOTE FastAPI Backend

REST API exposing the accuracy-weighted ensemble vote.
"""

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from sensorvote.core.exceptions import DegenerateWeightsError, InvalidInputError
from sensorvote.ensemble.weighted_voter import weighted_vote

# Initialize FastAPI app
app = FastAPI(
    title="SENSORVOTE API",
    description="Accuracy-weighted ensemble voting for sensor activity classifiers",
    version="1.0.0"
)


class VoteRequest(BaseModel):
    """Request model for an ensemble vote"""
    predictions: Dict[str, List[str]] = Field(..., description="Classifier id -> predicted label per sample")
    accuracies: Dict[str, float] = Field(..., description="Classifier id -> held-out accuracy (0-1)")
    true_labels: Optional[List[str]] = Field(None, description="Known labels, for scoring only")
    labels: Optional[List[str]] = Field(None, description="Full label set; inferred when omitted")


class VoteResponse(BaseModel):
    """Response model for an ensemble vote"""
    predictions: List[str] = Field(..., description="Ensemble label per sample, in input order")
    weights: Dict[str, float] = Field(..., description="Normalized classifier weights")
    labels: List[str] = Field(..., description="Candidate labels in tie-break order")
    accuracy: Optional[float] = Field(None, description="Ensemble accuracy when true labels were given")
    confusion_matrix: Optional[List[List[int]]] = Field(None, description="Rows true, columns predicted")


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "SENSORVOTE"}


@app.post("/api/vote", response_model=VoteResponse)
async def vote(request: VoteRequest):
    """
    Combine classifier predictions with accuracy-weighted voting.

    Each classifier's vote counts in proportion to its accuracy; ties go
    to the alphabetically first label.
    """
    try:
        result = weighted_vote(
            request.predictions,
            request.accuracies,
            true_labels=request.true_labels,
            labels=request.labels
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DegenerateWeightsError as e:
        raise HTTPException(status_code=400, detail=str(e))

    payload = result.to_dict()
    payload.pop("metadata")
    return VoteResponse(**payload)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
