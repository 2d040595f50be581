from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .models import PERSONAL_GROUP_ID
from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupMemberSerializer,
    GroupBudgetSerializer,
    InvitationSerializer,
    InviteMemberSerializer,
    UserMinimalSerializer,
)

from apps.groups.services import (
    create_group,
    delete_group,
    get_group_by_id,
    get_user_groups,
    resolve_group,
    get_group_members,
    invite_member,
    accept_invitation,
    get_pending_invitations,
    # Exceptions
    GroupNotFoundError,
    PersonalGroupError,
    AlreadyMemberError,
    NotMemberError,
    InvitationNotFoundError,
    InvitationExpiredError,
    InvitationUsedError,
    InsufficientPermissionsError,
)
from apps.budgets.services import update_group_budget


class GroupViewSet(viewsets.ViewSet):
    """
    ViewSet for groups.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Personal pseudo-group first, then the user's groups
    create: Create a new group
    retrieve: Get a specific group ('personal' included)
    destroy: Delete a group (creator only)
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: GroupSerializer(many=True)}, tags=['groups'])
    def list(self, request):
        """List all groups visible to the user."""
        groups = get_user_groups(user=request.user)
        serializer = GroupSerializer(groups, many=True, context={'request': request})
        return Response(serializer.data)

    @extend_schema(request=GroupCreateSerializer, responses={201: GroupSerializer}, tags=['groups'])
    def create(self, request):
        """Create a new group."""
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            created_by=request.user,
            description=serializer.validated_data.get('description', ''),
            emoji=serializer.validated_data.get('emoji', ''),
            color=serializer.validated_data.get('color', ''),
            currency=serializer.validated_data.get('currency', ''),
        )
        group = get_group_by_id(group_id=group.id)

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: GroupSerializer}, tags=['groups'])
    def retrieve(self, request, pk=None):
        """Get a single group."""
        try:
            group = resolve_group(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = GroupSerializer(group, context={'request': request})
        return Response(serializer.data)

    @extend_schema(tags=['groups'])
    def destroy(self, request, pk=None):
        """
        Delete a group.

        The client falls back to the personal group afterwards, which the
        response names explicitly.
        """
        try:
            delete_group(group_id=pk, user=request.user)
        except PersonalGroupError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({'selected_group': PERSONAL_GROUP_ID}, status=status.HTTP_200_OK)

    @extend_schema(responses={200: UserMinimalSerializer(many=True)}, tags=['groups'])
    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        try:
            members = get_group_members(group_id=pk, user=request.user)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        serializer = UserMinimalSerializer(members, many=True)
        return Response(serializer.data)

    @extend_schema(
        request=InviteMemberSerializer,
        responses={201: InvitationSerializer, 200: InvitationSerializer(many=True)},
        tags=['groups'],
    )
    @action(detail=True, methods=['get', 'post'])
    def invite(self, request, pk=None):
        """
        Issue an invitation link (POST) or list pending ones (GET).

        GET  /api/groups/{id}/invite/
        POST /api/groups/{id}/invite/
        Body: {"email": "optional@example.com"}
        """
        try:
            if request.method == 'GET':
                invitations = get_pending_invitations(group_id=pk, user=request.user)
                return Response(InvitationSerializer(invitations, many=True).data)

            serializer = InviteMemberSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            invitation = invite_member(
                group_id=pk,
                invited_by=request.user,
                email=serializer.validated_data.get('email', ''),
            )
        except PersonalGroupError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except NotMemberError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response(InvitationSerializer(invitation).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=GroupBudgetSerializer, responses={200: GroupSerializer}, tags=['groups'])
    @action(detail=True, methods=['put'])
    def budget(self, request, pk=None):
        """
        Set the group's monthly budget (admins only).

        PUT /api/groups/{id}/budget/
        Body: {"monthly_budget": "500.00"}
        """
        serializer = GroupBudgetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            group = update_group_budget(
                group_id=pk,
                user=request.user,
                amount=serializer.validated_data['monthly_budget'],
            )
        except PersonalGroupError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        group = get_group_by_id(group_id=group.id)
        return Response(GroupSerializer(group, context={'request': request}).data)


@extend_schema(
    request=None,
    responses={201: GroupMemberSerializer},
    description="Redeem an invitation token and join its group.",
    tags=['groups'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def accept_invitation_view(request, token):
    """Join a group through an invitation link."""
    try:
        membership = accept_invitation(token=token, user=request.user)
    except InvitationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (InvitationExpiredError, InvitationUsedError, AlreadyMemberError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    serializer = GroupMemberSerializer(membership)
    return Response(serializer.data, status=status.HTTP_201_CREATED)
