from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from accounts.permissions import IsApprovedUser
from fares.services import FuelPriceNotSetError
from services.exceptions import ServiceInputError
from services.ride_management import (
    ActiveRideExistsError,
    DriverNotAvailableError,
    DriverNotEligibleError,
    RideNotAvailableError,
    RideNotFoundError,
)
from services import ride_management
from .serializers import (
    RideRequestSerializer,
    RideRequestCreateSerializer,
    RideCompleteSerializer,
)


def _role_forbidden(user, role, action):
    if user.role != role:
        return Response(
            {'error': f'Only {role}s can {action}'},
            status=status.HTTP_403_FORBIDDEN
        )
    return None


def _error(code, message, http_status):
    return Response(
        {'success': False, 'error': code, 'message': message},
        status=http_status
    )


# ==================== Passenger Ride APIs ====================

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def create_ride_request(request):
    """Request a ride from one driver picked from the eligible list"""
    forbidden = _role_forbidden(request.user, 'passenger', 'create ride requests')
    if forbidden:
        return forbidden

    serializer = RideRequestCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        result = ride_management.create_ride_request(
            passenger=request.user,
            driver_id=data['driver_id'],
            pickup_latitude=data['pickup_latitude'],
            pickup_longitude=data['pickup_longitude'],
            payment_method=data['payment_method'],
        )
    except ActiveRideExistsError as e:
        return _error('active_ride_exists', str(e), status.HTTP_409_CONFLICT)
    except DriverNotAvailableError as e:
        return _error('driver_not_available', str(e), status.HTTP_404_NOT_FOUND)
    except DriverNotEligibleError as e:
        return _error('driver_not_eligible', str(e), status.HTTP_403_FORBIDDEN)
    except FuelPriceNotSetError as e:
        return _error('fuel_price_not_set', str(e), status.HTTP_503_SERVICE_UNAVAILABLE)
    except ServiceInputError as e:
        return _error('invalid_input', str(e), status.HTTP_400_BAD_REQUEST)

    return Response({
        'success': True,
        'ride': RideRequestSerializer(result.ride).data,
        'message': result.message,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def get_current_ride(request):
    """Passenger polling endpoint for the active ride"""
    forbidden = _role_forbidden(request.user, 'passenger', 'view their current ride')
    if forbidden:
        return forbidden

    ride = ride_management.get_current_passenger_ride(request.user)
    if ride is None:
        return Response({
            'has_active_ride': False,
            'message': 'No active ride found'
        })

    if ride.status == 'requested':
        message = 'Waiting for the driver to respond...'
    else:
        message = 'Driver is on the way!'

    return Response({
        'has_active_ride': True,
        'ride': RideRequestSerializer(ride).data,
        'status': ride.status,
        'message': message,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def cancel_ride(request, ride_id):
    """Passenger cancels a requested or accepted ride"""
    forbidden = _role_forbidden(request.user, 'passenger', 'cancel ride requests')
    if forbidden:
        return forbidden

    try:
        result = ride_management.cancel_ride_by_passenger(request.user, ride_id)
    except RideNotFoundError as e:
        return _error('ride_not_found', str(e), status.HTTP_404_NOT_FOUND)
    except RideNotAvailableError as e:
        return _error('ride_not_available', str(e), status.HTTP_409_CONFLICT)

    return Response({
        'success': True,
        'ride_id': result.ride.id,
        'was_accepted': result.extra['was_accepted'],
        'message': result.message,
    })


# ==================== Driver Ride APIs ====================

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def driver_current_rides(request):
    """Incoming requests and accepted rides for the driver"""
    forbidden = _role_forbidden(request.user, 'driver', 'view incoming rides')
    if forbidden:
        return forbidden

    rides = ride_management.get_current_driver_rides(request.user)
    data = RideRequestSerializer(rides, many=True).data
    return Response({'count': len(data), 'rides': data})


def _driver_action(request, ride_id, operation, action_name, **kwargs):
    forbidden = _role_forbidden(request.user, 'driver', action_name)
    if forbidden:
        return forbidden

    try:
        result = operation(request.user, ride_id, **kwargs)
    except RideNotFoundError as e:
        return _error('ride_not_found', str(e), status.HTTP_404_NOT_FOUND)
    except RideNotAvailableError as e:
        return _error('ride_not_available', str(e), status.HTTP_409_CONFLICT)

    return Response({
        'success': True,
        'ride': RideRequestSerializer(result.ride).data,
        'message': result.message,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def accept_ride(request, ride_id):
    """Accept a ride request addressed to this driver."""
    return _driver_action(request, ride_id, ride_management.accept_ride, 'accept rides')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def decline_ride(request, ride_id):
    """Decline a ride request addressed to this driver."""
    return _driver_action(request, ride_id, ride_management.decline_ride, 'decline rides')


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsApprovedUser])
def complete_ride(request, ride_id):
    """Complete an accepted ride, recording whether the passenger already paid."""
    serializer = RideCompleteSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    return _driver_action(
        request, ride_id, ride_management.complete_ride, 'complete rides',
        payment_received=serializer.validated_data['payment_received'],
    )


# ==================== Admin APIs ====================

@api_view(['POST'])
@permission_classes([IsAdminUser])
def mark_ride_paid(request, ride_id):
    """Settle a completed ride whose payment was still pending."""
    try:
        result = ride_management.mark_payment_received(ride_id, actor=request.user)
    except RideNotFoundError as e:
        return _error('ride_not_found', str(e), status.HTTP_404_NOT_FOUND)
    except RideNotAvailableError as e:
        return _error('ride_not_available', str(e), status.HTTP_409_CONFLICT)

    return Response({
        'success': True,
        'ride': RideRequestSerializer(result.ride).data,
        'message': result.message,
    })
