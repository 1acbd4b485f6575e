from memorycraver.models.profile import Profile
from memorycraver.models.author_profile import AuthorProfile
from memorycraver.models.book import Book
from memorycraver.models.chapter import Chapter
from memorycraver.models.purchase import Purchase
from memorycraver.models.email_log import EmailNotificationLog

# add ALL models here
