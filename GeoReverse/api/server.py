"""
API server module for the GeoReverse package.

This module provides a Flask-based API server for reverse geocoding
coordinates through RESTful API endpoints.
"""

import time
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple

from flask import Flask, Response, current_app, g, request
import werkzeug.exceptions

from GeoReverse.config import get_config
from GeoReverse.exceptions import GeoReverseError, InvalidParameterError, SystemError
from GeoReverse.services.geocode_service import GeocodeService
from GeoReverse.utils.logging import get_logger

# Get a logger for this module
logger = get_logger(__name__)

def format_response(data: Any = None, message: str = None,
                   error: str = None, status_code: int = 200,
                   meta: Dict[str, Any] = None,
                   error_code: str = None) -> Tuple[Dict[str, Any], int]:
    """
    Format API response in a standardized structure.

    Args:
        data: Response data payload
        message: Optional success message
        error: Optional error message
        status_code: HTTP status code
        meta: Optional metadata dictionary
        error_code: Optional error code identifier

    Returns:
        Tuple of (response_dict, status_code)
    """
    response = {
        'success': 200 <= status_code < 300,
        'status_code': status_code,
    }

    if data is not None:
        response['data'] = data

    if message:
        response['message'] = message

    if error:
        response['error'] = error

    if error_code:
        response['error_code'] = error_code

    if meta:
        response['meta'] = meta

    return response, status_code

def api_response(f: Callable) -> Callable:
    """
    Decorator wrapping an endpoint's return value in the standard envelope.

    Exceptions propagate to the application's error handlers.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        return format_response(data=f(*args, **kwargs))

    return decorated_function

def validate_params(required_params: Optional[List[str]] = None,
                    numeric_params: Optional[List[str]] = None):
    """
    Decorator for validating request parameters.

    Args:
        required_params: List of required parameter names
        numeric_params: List of parameters that must be numeric

    Returns:
        A decorated function
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            params = request.args.to_dict()
            errors = []

            for param in required_params or []:
                if not params.get(param):
                    errors.append(f"Missing required parameter: {param}")

            for param in numeric_params or []:
                if params.get(param):
                    try:
                        float(params[param])
                    except ValueError:
                        errors.append(f"Parameter must be numeric: {param}")

            if errors:
                raise InvalidParameterError(
                    message=f"Validation errors: {', '.join(errors)}",
                    user_message=f"Invalid parameters: {', '.join(errors)}",
                    context={'errors': errors}
                )

            return f(*args, **kwargs)

        return decorated_function

    return decorator

def create_app(service: Optional[GeocodeService] = None, debug: bool = False) -> Flask:
    """
    Create and configure a Flask application instance.

    Args:
        service: GeocodeService shared by every request. When None a service
            is built from the current configuration.
        debug: Enable debug mode with additional error information

    Returns:
        A configured Flask application
    """
    app = Flask(__name__)
    app.config.update(DEBUG=debug)

    if service is None:
        try:
            service = GeocodeService(min_population=get_config().get_min_population())
        except GeoReverseError as e:
            logger.error(f"Failed to initialize geocode service: {e.error_code} - {e.message}")

    app.config['GEOCODE_SERVICE'] = service
    app.config['INITIALIZED'] = service is not None
    if service is not None:
        logger.info(f"API ready with {service.record_count} cities")

    app.json.sort_keys = False
    app.json.ensure_ascii = False

    @app.before_request
    def before_request() -> None:
        """Set up request context with timing information."""
        g.start_time = time.time()

    @app.after_request
    def after_request(response: Response) -> Response:
        """Log request information and add timing headers."""
        if hasattr(g, 'start_time'):
            duration_ms = (time.time() - g.start_time) * 1000
            response.headers['X-Request-Duration-Ms'] = str(int(duration_ms))
            logger.info(
                f"Request: {request.method} {request.path} | "
                f"Status: {response.status_code} | "
                f"Duration: {duration_ms:.2f}ms"
            )
        return response

    @app.errorhandler(werkzeug.exceptions.HTTPException)
    def handle_http_error(error: werkzeug.exceptions.HTTPException) -> Tuple[Dict[str, Any], int]:
        """Handle routing and protocol errors raised by werkzeug."""
        return format_response(
            error=error.name,
            message=str(error.description),
            status_code=error.code,
            meta={'debug_info': str(error)} if debug else None
        )

    @app.errorhandler(GeoReverseError)
    def handle_georeverse_error(error: GeoReverseError) -> Tuple[Dict[str, Any], int]:
        """Handle GeoReverse-specific exceptions."""
        if error.status_code >= 500:
            logger.error(f"GeoReverse Error: {error.error_code} - {error.message}")
        else:
            logger.warning(f"GeoReverse Error: {error.error_code} - {error.message}")

        error.context['debug'] = debug
        error_dict = error.to_dict()

        return format_response(
            error=error.__class__.__name__,
            message=error.user_message,
            status_code=error.status_code,
            error_code=error.error_code,
            meta=error_dict.get('technical_details') if debug else None
        )

    @app.errorhandler(Exception)
    def handle_exception(error: Exception) -> Tuple[Dict[str, Any], int]:
        """Handle generic exceptions."""
        logger.exception(f"Unhandled server exception: {error}")
        system_error = SystemError(
            message=f"Unhandled exception: {error}",
            user_message="An unexpected error occurred.",
            context={'debug': debug},
            cause=error
        )
        return handle_georeverse_error(system_error)

    register_routes(app)

    return app

def get_geocode_service() -> GeocodeService:
    """
    Get the GeocodeService shared by the current application.

    Raises:
        SystemError: If the service failed to initialize
    """
    service = current_app.config.get('GEOCODE_SERVICE')
    if service is None:
        raise SystemError(
            "Geocode service is not initialized",
            user_message="The geocoding data is not available. Please try again later.",
            status_code=503
        )
    return service

def register_routes(app: Flask) -> None:
    """
    Register API routes with the Flask application.

    Args:
        app: Flask application instance
    """
    @app.route('/api/health', methods=['GET'])
    @api_response
    def health() -> Dict[str, Any]:
        """
        Health check endpoint.

        Returns basic status information about the API service.
        """
        service = app.config.get('GEOCODE_SERVICE')
        return {
            'status': 'ok',
            'service': 'GeoReverse API',
            'initialized': app.config.get('INITIALIZED', False),
            'record_count': service.record_count if service is not None else 0,
            'timestamp': time.time()
        }

    @app.route('/api/info', methods=['GET'])
    @api_response
    def info() -> Dict[str, Any]:
        """Dataset and index information."""
        return get_geocode_service().get_info()

    @app.route('/api/reverse', methods=['GET'])
    @validate_params(required_params=['lat', 'lng'], numeric_params=['lat', 'lng'])
    @api_response
    def reverse() -> Dict[str, Any]:
        """
        Find the city nearest to a coordinate.

        Query parameters:
            lat: Latitude value (-90 to 90)
            lng: Longitude value (-180 to 180)
        """
        lat = float(request.args['lat'])
        lng = float(request.args['lng'])

        if not -90 <= lat <= 90:
            raise InvalidParameterError(
                f"lat out of range: {lat}",
                user_message=f"lat must be between -90 and 90, got {lat}"
            )
        if not -180 <= lng <= 180:
            raise InvalidParameterError(
                f"lng out of range: {lng}",
                user_message=f"lng must be between -180 and 180, got {lng}"
            )

        results = get_geocode_service().query(lat, lng)

        return {
            'lat': lat,
            'lng': lng,
            'count': len(results),
            'results': [record.to_dict() for record in results]
        }

def start_server(host: str = '0.0.0.0', port: int = 5000, debug: bool = False,
                 service: Optional[GeocodeService] = None) -> None:
    """
    Start the API server.

    Args:
        host: Host address to bind to
        port: Port to listen on
        debug: Whether to run in debug mode
        service: Optional prebuilt GeocodeService

    Raises:
        RuntimeError: If the geocode service could not be initialized
    """
    app = create_app(service, debug)

    if not app.config.get('INITIALIZED', False):
        raise RuntimeError("Could not start server: geocode service failed to initialize")

    logger.info(f"Starting GeoReverse API server on {host}:{port} (debug: {debug})")
    app.run(host=host, port=port, debug=debug)
