"""도메인 예외"""


class DomainError(Exception):
    """도메인 레이어 기본 예외"""
    pass


class PaymentNotFoundError(DomainError):
    def __init__(self, payment_id: str):
        self.payment_id = payment_id
        super().__init__(f"결제 정보를 찾을 수 없습니다: {payment_id}")


class PaymentLookupUnavailableError(DomainError):
    """어느 저장소에서도 찾지 못했고 결제사 조회도 실패한 경우 (부재 확인 불가)"""
    def __init__(self, payment_id: str, reason: str = ""):
        self.payment_id = payment_id
        self.reason = reason
        super().__init__(f"결제 상태를 확인할 수 없습니다: {payment_id} ({reason})")


class ProviderConfigurationError(DomainError):
    def __init__(self, detail: str = "결제사 연동 설정이 누락되었습니다."):
        self.detail = detail
        super().__init__(detail)


class RecordStoreError(DomainError):
    def __init__(self, table: str, detail: str):
        self.table = table
        super().__init__(f"데이터베이스 오류 ({table}): {detail}")


class InvalidStatusTransitionError(DomainError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"허용되지 않는 상태 전이입니다: {current} -> {target}")


class InvalidCallbackError(DomainError):
    def __init__(self, reason: str):
        super().__init__(f"유효하지 않은 콜백입니다: {reason}")
