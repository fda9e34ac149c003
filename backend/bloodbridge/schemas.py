from typing import Annotated, Any, List, Literal, Optional, Union
from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.networks import validate_email

def _checked_email(value: str) -> str:
    # format check only; lookups are exact, so the stored value stays as sent
    validate_email(value)
    return value

Email = Annotated[str, AfterValidator(_checked_email)]

# --------------------------
# Enums
# --------------------------
Role = Literal["donor", "volunteer", "admin"]
UserStatus = Literal["active", "blocked"]
RequestStatus = Literal["pending", "inprogress", "done", "canceled"]
BlogStatus = Literal["draft", "published"]

BLOG_STATUSES = ("draft", "published")

class StrictModel(BaseModel):
    # unknown fields are rejected, never written through to storage
    model_config = ConfigDict(extra="forbid")

# --------------------------
# Users
# --------------------------
class UserCreate(StrictModel):
    uid: str = Field(..., min_length=1)
    email: Email
    name: Optional[str] = None
    avatar: Optional[str] = None
    bloodGroup: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None

class UserProfileUpdate(StrictModel):
    name: Optional[str] = None
    avatar: Optional[str] = None
    bloodGroup: Optional[str] = None
    district: Optional[str] = None
    upazila: Optional[str] = None

class UserAdminUpdate(UserProfileUpdate):
    role: Optional[Role] = None
    status: Optional[UserStatus] = None

class UserStatusUpdate(StrictModel):
    status: UserStatus

class UserRoleUpdate(StrictModel):
    role: Role

# --------------------------
# Donation requests
# --------------------------
class DonationRequestFields(StrictModel):
    requesterName: Optional[str] = None
    requesterEmail: Email
    recipientName: str
    recipientDistrict: Optional[str] = None
    recipientUpazila: Optional[str] = None
    hospitalName: Optional[str] = None
    fullAddress: Optional[str] = None
    bloodGroup: str
    donationDate: Optional[str] = None
    donationTime: Optional[str] = None
    requestMessage: Optional[str] = None
    donorName: Optional[str] = None
    donorEmail: Optional[Email] = None

class DonationRequestCreate(DonationRequestFields):
    # accepted for client convenience, always replaced server-side
    status: Optional[Any] = None
    createdAt: Optional[Any] = None

class DonationRequestReplace(DonationRequestFields):
    status: Optional[RequestStatus] = None

class DonationRequestPatch(StrictModel):
    requesterName: Optional[str] = None
    requesterEmail: Optional[Email] = None
    recipientName: Optional[str] = None
    recipientDistrict: Optional[str] = None
    recipientUpazila: Optional[str] = None
    hospitalName: Optional[str] = None
    fullAddress: Optional[str] = None
    bloodGroup: Optional[str] = None
    donationDate: Optional[str] = None
    donationTime: Optional[str] = None
    requestMessage: Optional[str] = None
    donorName: Optional[str] = None
    donorEmail: Optional[Email] = None
    status: Optional[RequestStatus] = None

class DonationStatusUpdate(StrictModel):
    status: RequestStatus

# --------------------------
# Blogs
# --------------------------
class BlogCreate(StrictModel):
    title: str = Field(..., min_length=1)
    content: str
    thumbnail: Optional[str] = None
    # new posts always start as drafts
    status: Optional[Any] = None

class BlogStatusUpdate(StrictModel):
    status: BlogStatus

# --------------------------
# Fundings
# --------------------------
class PaymentIntentIn(StrictModel):
    amount: float = Field(..., gt=0)

class PaymentIntentOut(BaseModel):
    clientSecret: str

class FundingIn(StrictModel):
    name: str
    amount: float = Field(..., gt=0)
    # ignored: the verified token decides who funded
    email: Optional[str] = None

class FundingPage(BaseModel):
    total: int
    page: int
    limit: int
    funds: List[dict]

class FundingTotal(BaseModel):
    total: Union[int, float]

# --------------------------
# Stats
# --------------------------
class AdminStats(BaseModel):
    totalUsers: int
    totalRequests: int
    totalFunding: Union[int, float]
