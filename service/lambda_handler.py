from typing import Any, Dict

from mangum import Mangum

from service.maven_registry.main import app

handler = Mangum(app, lifespan="auto")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handler(event, context)
