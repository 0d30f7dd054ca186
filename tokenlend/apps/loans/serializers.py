from rest_framework import serializers


class LoanRequestSerializer(serializers.Serializer):
    userAddress = serializers.CharField()
    mintAddress = serializers.CharField()
    # whole tokens, scaled by the token decimals before disbursement
    amount = serializers.CharField()


class DisbursementSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    txId = serializers.CharField(source="tx_id")
    loanId = serializers.IntegerField(source="loan_id")


class ReadableLoanSerializer(serializers.Serializer):
    loanId = serializers.IntegerField(source="loan_id")
    tokenAddress = serializers.CharField(source="token_address")
    tokenName = serializers.CharField(source="token_name")
    userAddress = serializers.CharField(source="user_address")
    txId = serializers.CharField(source="tx_id", allow_null=True)
    amount = serializers.CharField()
    timestamp = serializers.DateTimeField()
