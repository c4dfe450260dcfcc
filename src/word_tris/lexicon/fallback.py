"""Built-in word and syllable data that keep the game playable without assets."""

from __future__ import annotations

FALLBACK_WORDS = frozenset({
    "사과", "바나나", "오렌지", "포도", "수박", "딸기", "키위", "망고", "파인애플", "복숭아",
    "학교", "공부", "시험", "숙제", "선생님", "학생", "교실", "책상", "의자", "칠판",
    "컴퓨터", "스마트폰", "태블릿", "노트북", "마우스", "키보드", "모니터", "프린터", "스캐너", "헤드폰",
    "자동차", "버스", "지하철", "비행기", "기차", "자전거", "오토바이", "택시", "트럭", "보트",
    "가족", "부모님", "형제", "자매", "친구", "이웃", "동료", "선배", "후배", "연인",
    "사랑", "행복", "슬픔", "분노", "기쁨", "두려움", "놀라움", "혐오", "미소", "눈물",
    "하늘", "바다", "산", "강", "호수", "숲", "사막", "정글", "빙하", "화산",
    "음악", "영화", "드라마", "책", "그림", "춤", "노래", "시", "소설", "공연",
    "한국", "미국", "중국", "일본", "영국", "프랑스", "독일", "호주", "캐나다", "브라질",
    "음식", "요리", "식당", "카페", "맛집", "주방", "식사", "간식", "건강", "영양",
})

DEMO_WORDS = ("사과", "바나나", "학교", "공부", "친구", "가족", "행복", "사랑", "여행", "음식")

# Frequent syllables, most frequent first.
COMMON_SYLLABLES = (
    "가", "나", "다", "라", "마", "바", "사", "아", "자", "차", "카", "타", "파", "하",
    "개", "내", "대", "래", "매", "배", "새", "애", "재", "채", "캐", "태", "패", "해",
    "거", "너", "더", "러", "머", "버", "서", "어", "저", "처", "커", "터", "퍼", "허",
    "게", "네", "데", "레", "메", "베", "세", "에", "제", "체", "케", "테", "페", "헤",
    "고", "노", "도", "로", "모", "보", "소", "오", "조", "초", "코", "토", "포", "호",
    "구", "누", "두", "루", "무", "부", "수", "우", "주", "추", "쿠", "투", "푸", "후",
    "그", "느", "드", "르", "므", "브", "스", "으", "즈", "츠", "크", "트", "프", "흐",
    "기", "니", "디", "리", "미", "비", "시", "이", "지", "치", "키", "티", "피", "히",
    "강", "경", "공", "관", "교", "국", "군", "권", "귀", "규", "균", "극", "근", "금",
    "길", "김", "꿈", "날", "남", "논", "달", "담", "당", "동", "돈", "되", "된", "들",
    "등", "딸", "때", "땅", "떼", "뜻", "락", "란", "람", "량", "려", "력", "련", "령",
    "례", "록", "론", "료", "류", "률", "린", "림", "립", "만", "말", "맑", "맵", "면",
    "명", "몸", "물", "민", "방", "백", "뱀", "번", "벌", "범", "법", "변", "별", "복",
    "본", "북", "불", "빛", "산", "살", "상", "생", "석", "선", "설", "성", "속", "손",
    "송", "순", "술", "숲", "쉬", "슬", "습", "식", "신", "실", "심", "십", "싸", "쌀",
    "썩", "쏘", "씨", "악", "안", "알", "암", "압", "앞", "야", "양", "억", "언", "얼",
    "엄", "업",
)

TOP_FREQUENCY_SIZE = 200
