from abc import ABC, abstractmethod

class IAuthService(ABC):
    @abstractmethod
    async def login(self, email: str, db) -> dict:
        pass
