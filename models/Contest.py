STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED)

# Fields a creator may overwrite while the contest is pending
EDITABLE_FIELDS = (
    "title",
    "image",
    "description",
    "taskInstruction",
    "contestType",
    "price",
    "prizeMoney",
    "deadline",
)


class Contest:
    def __init__(self, title, deadline, creator_email, creator_name, image=None, description="",
                 task_instruction="", contest_type="", price=0.0, prize_money=0.0, created_at=None):
        self.title = title
        self.image = image
        self.description = description
        self.task_instruction = task_instruction
        self.contest_type = contest_type
        self.price = price
        self.prize_money = prize_money
        self.deadline = deadline
        self.creator_email = creator_email
        self.creator_name = creator_name
        self.status = STATUS_PENDING
        self.participants = []
        self.submissions = []
        self.winner_email = None
        self.winner_name = None
        self.winner_image = None
        self.created_at = created_at
        self.updated_at = created_at

    def to_dict(self):
        return {
            "title": self.title,
            "image": self.image,
            "description": self.description,
            "taskInstruction": self.task_instruction,
            "contestType": self.contest_type,
            "price": self.price,
            "prizeMoney": self.prize_money,
            "deadline": self.deadline,
            "creatorEmail": self.creator_email,
            "creatorName": self.creator_name,
            "status": self.status,
            "participants": list(self.participants),
            "participantEmails": [p["email"] for p in self.participants],
            "participantCount": len(self.participants),
            "submissions": list(self.submissions),
            "winnerEmail": self.winner_email,
            "winnerName": self.winner_name,
            "winnerImage": self.winner_image,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at
        }


def participant_emails(contest):
    return [p.get("email") for p in contest.get("participants") or []]


def find_submission(contest, email):
    for submission in contest.get("submissions") or []:
        if submission.get("email") == email:
            return submission
    return None
