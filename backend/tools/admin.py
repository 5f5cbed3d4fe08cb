"""관리자 CLI 도구

사용법 (backend 디렉터리 기준):
    python tools/admin.py stats                          결제 / 크레딧 현황 요약
    python tools/admin.py payments                       최근 결제 내역
    python tools/admin.py payments --user <user_id>      사용자별 필터
    python tools/admin.py payments --status pending      상태별 필터
    python tools/admin.py credits <user_id>              크레딧 조회
    python tools/admin.py credits <user_id> +5           크레딧 추가
    python tools/admin.py confirm <gateway_payment_id>   게이트웨이 재조회 후 수동 정산
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select, func

from config import settings
from domain.enums import PaymentStatus
from domain.exceptions import DomainError
from application.use_cases.confirm_payment import ConfirmPaymentUseCase
from application.use_cases.observe_payment import ObservePaymentUseCase
from infrastructure.payment.mollie_gateway import MollieGateway
from infrastructure.persistence.database import get_db_session
from infrastructure.persistence.models import Payment, Profile
from infrastructure.persistence.repositories import SqlAlchemyPaymentRepository, SqlAlchemyCreditLedger


# ==================== 유틸 ====================

def fmt_date(dt) -> str:
    if not dt:
        return "-"
    return dt.strftime("%Y-%m-%d %H:%M")


def fmt_amount(amount, currency: str = None) -> str:
    return f"{amount:,.2f} {currency or settings.PAYMENT_CURRENCY}"


def print_table(headers: list, rows: list, col_widths: list = None):
    """간단한 테이블 출력"""
    if not col_widths:
        col_widths = [max(len(str(h)), max((len(str(r[i])) for r in rows), default=0)) + 2
                      for i, h in enumerate(headers)]

    header_line = "".join(str(h).ljust(w) for h, w in zip(headers, col_widths))
    print(header_line)
    print("-" * len(header_line))
    for row in rows:
        print("".join(str(c).ljust(w) for c, w in zip(row, col_widths)))


def parse_credit_grant(amount_str: str) -> int:
    """'+5' → 5. 잔액 직접 설정은 지원하지 않는다."""
    if not amount_str.startswith("+"):
        raise ValueError("+N 형식으로 추가할 크레딧을 지정해주세요.")
    delta = int(amount_str[1:])
    if delta <= 0:
        raise ValueError("추가 크레딧은 양수여야 합니다.")
    return delta


# ==================== 명령어 ====================

async def cmd_stats():
    """결제 / 크레딧 현황 요약"""
    async with get_db_session() as s:
        total_profiles = (await s.execute(select(func.count(Profile.id)))).scalar()
        outstanding = (await s.execute(select(func.sum(Profile.video_credits)))).scalar() or 0

        status_counts = {}
        for st in PaymentStatus:
            status_counts[st.value] = (await s.execute(
                select(func.count(Payment.id)).where(Payment.status == st)
            )).scalar()

        revenue = (await s.execute(
            select(func.sum(Payment.amount)).where(Payment.status == PaymentStatus.PAID)
        )).scalar() or 0
        credits_sold = (await s.execute(
            select(func.sum(Payment.credits_purchased)).where(Payment.status == PaymentStatus.PAID)
        )).scalar() or 0

    print("=== 서비스 현황 ===\n")

    print("[사용자]")
    print(f"  프로필: {total_profiles}명")
    print(f"  미사용 크레딧: {outstanding}")

    print("\n[결제]")
    for st, cnt in status_counts.items():
        print(f"  {st}: {cnt}건")

    print("\n[매출]")
    print(f"  누적: {fmt_amount(revenue)} (판매 크레딧 {credits_sold})")


async def cmd_payments(user_id: str = None, status: str = None, limit: int = 50):
    """최근 결제 내역"""
    status_filter = None
    if status:
        try:
            status_filter = PaymentStatus(status)
        except ValueError:
            print(f"잘못된 상태: {status} ({'/'.join(s.value for s in PaymentStatus)})")
            sys.exit(1)

    async with get_db_session() as s:
        payments = await SqlAlchemyPaymentRepository(s).list_recent(limit, user_id, status_filter)

    if not payments:
        print("결제 내역이 없습니다.")
        return

    headers = ["일시", "사용자", "패키지", "금액", "크레딧", "상태", "게이트웨이 ID"]
    rows = [
        [fmt_date(p.created_at), p.user_id[:20], p.package_id, fmt_amount(p.amount, p.currency),
         p.credits_purchased, p.status.value, p.gateway_payment_id]
        for p in payments
    ]
    print(f"결제 내역 ({len(rows)}건):\n")
    print_table(headers, rows)


async def cmd_credits(user_id: str, amount_str: str = None):
    """크레딧 조회 / 추가"""
    async with get_db_session() as s:
        ledger = SqlAlchemyCreditLedger(s)
        try:
            old_credits = await ledger.get(user_id)
        except DomainError as e:
            print(str(e))
            sys.exit(1)

        if amount_str is None:
            print(f"{user_id}: 크레딧 {old_credits}")
            return

        try:
            amount = parse_credit_grant(amount_str)
        except ValueError as e:
            print(f"잘못된 크레딧 값: {amount_str} ({e})")
            sys.exit(1)

        await ledger.grant(user_id, amount)
        new_credits = await ledger.get(user_id)

    print(f"{user_id}: 크레딧 {old_credits} -> {new_credits}")


async def cmd_confirm(gateway_payment_id: str):
    """웹훅이 누락된 결제를 게이트웨이 상태로 정산"""
    gateway = MollieGateway(api_key=settings.MOLLIE_API_KEY, api_url=settings.MOLLIE_API_URL,
                            timeout=settings.MOLLIE_TIMEOUT, currency=settings.PAYMENT_CURRENCY)
    async with get_db_session() as s:
        repo = SqlAlchemyPaymentRepository(s)
        observe = ObservePaymentUseCase(repo, SqlAlchemyCreditLedger(s))
        try:
            result = await ConfirmPaymentUseCase(repo, gateway, observe).execute(
                gateway_payment_id=gateway_payment_id)
        except DomainError as e:
            print(f"확인 실패: {e}")
            sys.exit(1)

    print(f"{gateway_payment_id}: {result.status.value} ({result.outcome.value})"
          + (f", 크레딧 {result.credits_granted} 지급" if result.credited else ""))


# ==================== 메인 ====================

def main(argv=None):
    parser = argparse.ArgumentParser(
        description="FlavorSwipe 크레딧 / 결제 관리 CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
명령어:
  stats                                   결제 / 크레딧 현황 요약
  payments [--user ID] [--status S]       결제 내역
  credits <user_id> [+N]                  크레딧 조회 / 추가
  confirm <gateway_payment_id>            게이트웨이 재조회 후 정산
        """,
    )
    parser.add_argument("command", help="명령어")
    parser.add_argument("args", nargs="*", help="추가 인자")
    parser.add_argument("--user", help="사용자 ID 필터 (payments 명령)")
    parser.add_argument("--status", help="결제 상태 필터 (payments 명령)")
    parser.add_argument("--limit", type=int, default=50, help="조회 건수 (payments 명령)")

    args = parser.parse_args(argv)
    cmd = args.command

    # DB 상대 경로가 올바르게 해석되도록 backend 로 이동
    os.chdir(BACKEND_DIR)

    if cmd == "stats":
        asyncio.run(cmd_stats())

    elif cmd == "payments":
        asyncio.run(cmd_payments(args.user, args.status, args.limit))

    elif cmd == "credits":
        if not args.args:
            parser.error("사용자 ID 를 지정해주세요: admin.py credits <user_id> [+N]")
        amount = args.args[1] if len(args.args) > 1 else None
        asyncio.run(cmd_credits(args.args[0], amount))

    elif cmd == "confirm":
        if not args.args:
            parser.error("결제 ID 를 지정해주세요: admin.py confirm <gateway_payment_id>")
        asyncio.run(cmd_confirm(args.args[0]))

    else:
        parser.error(f"알 수 없는 명령: {cmd}")


if __name__ == "__main__":
    main()
