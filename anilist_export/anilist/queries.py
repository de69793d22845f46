from __future__ import annotations

USER_QUERY = """
query User($name: String) {
  User(name: $name) {
    id
    name
    about
    avatar { large }
    bannerImage
  }
}
"""

MEDIA_LIST_QUERY = """
query MediaList($page: Int, $perPage: Int, $userId: Int) {
  Page(page: $page, perPage: $perPage) {
    mediaList(userId: $userId) {
      id
      mediaId
      createdAt
      customLists
      advancedScores
      notes
      private
      repeat
      progressVolumes
      progress
      updatedAt
      status
      score
      userId
      startedAt { year month day }
      completedAt { year month day }
      media { id type }
    }
  }
}
"""

# seules les ListActivity portent un média, les autres types sont filtrés côté API
ACTIVITY_QUERY = """
query Page($page: Int, $perPage: Int, $userId: Int) {
  Page(page: $page, perPage: $perPage) {
    activities(userId: $userId, type: MEDIA_LIST) {
      ... on ListActivity {
        createdAt
        id
        likeCount
        progress
        userId
        type
        status
        isLocked
        replyCount
        media { id type }
      }
    }
  }
}
"""
