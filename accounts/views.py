"""
Account API Views.

Implements:
- GET/POST /users - List and create accounts
- GET/PATCH/DELETE /users/{id} - Account detail
- POST /auth/login - Email/password login
"""
from rest_framework import generics
from rest_framework.views import APIView

from core.responses import result_response
from core.views import EnvelopeMixin
from .models import Account
from .serializers import AccountSerializer, LoginSerializer
from .services import authenticate


class AccountListCreateView(EnvelopeMixin, generics.ListCreateAPIView):
    """
    GET: List all accounts, newest first
    POST: Create an account (password is hashed)

    Query Parameters (GET):
        - role: Filter by role (admin, user)
    """
    serializer_class = AccountSerializer

    def get_queryset(self):
        queryset = Account.objects.all()
        role = self.request.query_params.get('role', '').lower()
        if role in Account.Role.values:
            queryset = queryset.filter(role=role)
        return queryset.order_by('-created_at')


class AccountDetailView(EnvelopeMixin, generics.RetrieveUpdateDestroyAPIView):
    """
    GET: Retrieve an account
    PATCH: Partially update an account (a new password is re-hashed)
    DELETE: Delete an account
    """
    queryset = Account.objects.all()
    serializer_class = AccountSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']


class LoginView(EnvelopeMixin, APIView):
    """
    POST: Check credentials and return the account record.

    Request Body:
    {
        "email": "shop@example.com",
        "password": "secret"
    }
    """

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = authenticate(
            serializer.validated_data['email'],
            serializer.validated_data['password']
        )
        return result_response(result, lambda account: AccountSerializer(account).data)
