from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
import logging

from tokenlend.apps.loans.serializers import (
    DisbursementSerializer,
    LoanRequestSerializer,
    ReadableLoanSerializer,
)
from tokenlend.errors import InvalidRequestError, LendingError
from tokenlend.services import get_services
from tokenlend.utils import scale_amount, validate_address

logger = logging.getLogger(__name__)


def error_response(error: LendingError, status_code: int) -> Response:
    return Response({"error": error.message}, status=status_code)


@api_view(["POST"])
def request_loan(request):
    serializer = LoanRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response(InvalidRequestError(), status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    try:
        user_address = validate_address(data["userAddress"])
        token_address = validate_address(data["mintAddress"])

        services = get_services()
        token_info = services.tokens.get_token_info(token_address)
        amount = scale_amount(data["amount"], token_info.decimals)

        result = services.loans.disburse_loan(user_address, token_address, amount)
    except LendingError as e:
        logger.info(f"Loan request rejected: {e.message}")
        return error_response(e, status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.exception("Loan request failed")
        return error_response(LendingError(), status.HTTP_400_BAD_REQUEST)

    return Response(DisbursementSerializer(result).data)


@api_view(["GET"])
def get_outstanding_loans(request):
    user_address = request.query_params.get("userAddress")
    if not user_address:
        return error_response(InvalidRequestError(), status.HTTP_400_BAD_REQUEST)

    try:
        user_address = validate_address(user_address)
        loans = get_services().loans.get_outstanding_loans(user_address, readable=True)
    except LendingError as e:
        return error_response(e, status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception(f"Fetching loans of {user_address} failed")
        return error_response(LendingError(), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(ReadableLoanSerializer(loans, many=True).data)


@api_view(["GET"])
def get_all_outstanding_loans(request):
    try:
        authority_address = validate_address(request.query_params.get("authorityAddress"))
        loans = get_services().loans.get_all_outstanding_loans(authority_address)
    except LendingError as e:
        return error_response(e, status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("Fetching all outstanding loans failed")
        return error_response(LendingError(), status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(ReadableLoanSerializer(loans, many=True).data)
