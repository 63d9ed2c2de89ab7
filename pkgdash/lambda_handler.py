from typing import Any, Dict
from mangum import Mangum

from pkgdash.main import app

# lifespan "auto" runs the startup hook (table creation) on cold start
handler = Mangum(app, lifespan="auto")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    return handler(event, context)
