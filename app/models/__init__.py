from .profile.pilgrim_profile import PilgrimProfile, VerificationStatus
from .activity.activity import Activity, ActivityTypeEnum
from .activity.activity_participant import ActivityParticipant
from .activity.chat_message import ChatMessage
from .activity.rating import Rating
from .donation.donation import Donation
from .push.push_subscription import PushSubscription
from .access.invite_code import InviteCode, InviteRedemption
from .moderation.user_block import UserBlock
from .moderation.report import Report, ReportReason, ReportStatus
