"""
Review views.
"""
import logging
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from core.pagination import StandardResultsSetPagination
from ..serializers import ReviewSerializer
from ..services import ReviewService

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([permissions.IsAuthenticated])
def create_review(request, pk):
    """
    POST /api/appointments/{id}/review/

    **Restrictions**:
    - Only the appointment's client can rate it
    - The appointment must be completed
    - One review per appointment (409 on a second attempt)

    **Request Body**:
    ```json
    {
        "rating": 5,
        "comment": "Quick and tidy work",
        "images": []
    }
    ```
    """
    serializer = ReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    review = ReviewService().create(pk, request.user, serializer.validated_data)
    return Response(ReviewSerializer(review).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([permissions.IsAuthenticated])
def partner_reviews(request, partner_id):
    """
    GET /api/appointments/partner/{partner_id}/reviews/?page=1

    Average rating, total count and a paginated list of reviews.
    """
    summary = ReviewService().summary_for_partner(partner_id)

    paginator = StandardResultsSetPagination()
    page = paginator.paginate_queryset(summary['reviews'], request)
    response = paginator.get_paginated_response(ReviewSerializer(page, many=True).data)
    response.data['average'] = summary['average']
    response.data['total'] = summary['total']
    return response
