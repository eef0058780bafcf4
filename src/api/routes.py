"""
API routes - Trip catalog, client and enrollment endpoints.

Defines REST endpoints for the travel agency API:
- GET /api/trips - List trips with countries
- GET /api/clients/{client_id}/trips - List a client's trips
- POST /api/clients - Create a client
- PUT /api/clients/{client_id}/trips/{trip_id} - Register for a trip
- DELETE /api/clients/{client_id}/trips/{trip_id} - Unregister from a trip
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from src.api.dependencies import (
    get_client_registry,
    get_enrollment_service,
    get_trip_catalog,
)
from src.api.models import (
    ClientTripResponse,
    CreateClientRequest,
    CreateClientResponse,
    ErrorResponse,
    MessageResponse,
    TripResponse,
)
from src.domain.catalog import TripCatalogService
from src.domain.clients import ClientRegistry
from src.domain.enrollment import EnrollmentService
from src.domain.exceptions import (
    AlreadyRegistered,
    CapacityExceeded,
    ClientNotFound,
    RegistrationNotFound,
    TripNotFound,
    ValidationError,
)

router = APIRouter(tags=["travel"])


@router.get(
    "/trips",
    response_model=list[TripResponse],
    summary="List trips",
    description="List every trip with its destination countries.",
)
def list_trips(
    catalog: TripCatalogService = Depends(get_trip_catalog),
) -> list[TripResponse]:
    return [
        TripResponse(
            id=trip.id,
            name=trip.name,
            description=trip.description,
            date_from=trip.date_from,
            date_to=trip.date_to,
            max_people=trip.max_people,
            countries=trip.countries,
        )
        for trip in catalog.list_trips()
    ]


@router.get(
    "/clients/{client_id}/trips",
    response_model=list[ClientTripResponse],
    responses={404: {"model": ErrorResponse, "description": "Client not found"}},
    summary="List a client's trips",
    description="List every trip the client is registered to, "
    "with registration and payment dates.",
)
def list_client_trips(
    client_id: int,
    catalog: TripCatalogService = Depends(get_trip_catalog),
) -> list[ClientTripResponse]:
    try:
        trips = catalog.list_trips_for_client(client_id)
    except ClientNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found",
        ) from None
    return [
        ClientTripResponse(
            trip_id=trip.trip_id,
            name=trip.name,
            description=trip.description,
            date_from=trip.date_from,
            date_to=trip.date_to,
            max_people=trip.max_people,
            registered_at=trip.registered_at,
            payment_date=trip.payment_date,
        )
        for trip in trips
    ]


@router.post(
    "/clients",
    response_model=CreateClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing required field"}},
    summary="Create a client",
    description="Create a client. firstName, lastName, email and pesel are required; "
    "telephone is optional.",
)
def create_client(
    request_data: CreateClientRequest,
    response: Response,
    registry: ClientRegistry = Depends(get_client_registry),
) -> CreateClientResponse:
    try:
        client_id = registry.create_client(
            first_name=request_data.first_name,
            last_name=request_data.last_name,
            email=request_data.email,
            pesel=request_data.pesel,
            telephone=request_data.telephone,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from None
    response.headers["Location"] = f"/api/clients/{client_id}"
    return CreateClientResponse(client_id=client_id)


@router.put(
    "/clients/{client_id}/trips/{trip_id}",
    response_model=MessageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Trip is full"},
        404: {"model": ErrorResponse, "description": "Client or trip not found"},
        409: {"model": ErrorResponse, "description": "Client already registered"},
    },
    summary="Register a client for a trip",
    description="Register the client for the trip if a seat is free "
    "and the client is not registered yet.",
)
def register_for_trip(
    client_id: int,
    trip_id: int,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> MessageResponse:
    try:
        service.register(client_id, trip_id)
    except ClientNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Client not found",
        ) from None
    except TripNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found",
        ) from None
    except CapacityExceeded:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Maximum number of participants reached",
        ) from None
    except AlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Client is already registered for this trip",
        ) from None
    return MessageResponse(message="Client registered for trip")


@router.delete(
    "/clients/{client_id}/trips/{trip_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse, "description": "Registration not found"}},
    summary="Unregister a client from a trip",
)
def unregister_from_trip(
    client_id: int,
    trip_id: int,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> MessageResponse:
    try:
        service.unregister(client_id, trip_id)
    except RegistrationNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Registration not found",
        ) from None
    return MessageResponse(message="Client unregistered from trip")
