# whisperer/schemas/model.py
from pydantic import BaseModel
from typing import Dict, List, Optional


class LLMPricing(BaseModel):
    currency: str
    unit: str
    inputCost: float
    outputCost: Optional[float] = None


class LLM(BaseModel):
    modelId: str
    modelName: str
    provider: str
    hostedId: str
    platformLink: str
    imageInput: bool
    pricing: Optional[LLMPricing] = None


class HostedModelsResponse(BaseModel):
    envKeyMap: Dict[str, bool]
    hostedModels: List[LLM]


class KeysResponse(BaseModel):
    isUsingEnvKeyMap: Dict[str, bool]
